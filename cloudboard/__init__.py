"""Terminal dashboard for EC2 instances and Lambda functions."""

__version__ = "0.3.0"
