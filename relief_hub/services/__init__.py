"""Server-side operations. Services raise AppError subclasses; routers wrap results in the envelope."""
