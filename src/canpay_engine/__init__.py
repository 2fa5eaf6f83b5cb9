"""Canadian payroll estimator: gross pay, statutory deductions and net pay."""

__version__ = "1.0.0"
