"""
Simulation models: innings SDE core, Monte Carlo prediction, tournaments.
"""
