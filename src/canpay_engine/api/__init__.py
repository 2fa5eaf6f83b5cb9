"""HTTP API for the payroll estimator."""
