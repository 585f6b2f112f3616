"""Relief coordination backend: help requests, camps, donations and their inventory."""

__version__ = "0.1.0"
