"""Path generation: increments, integrator, reflection, local time, ensembles."""
