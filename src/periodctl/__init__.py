"""periodctl: payroll period lifecycle engine."""

__version__ = "0.3.0"
