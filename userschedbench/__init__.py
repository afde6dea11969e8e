"""Run commands under Linux scheduling policies and benchmark a per-user scheduler."""

__version__ = "1.0.0"