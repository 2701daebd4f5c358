"""
Reference scattering models and statistical helpers used to exercise the
estimators and the command-line drivers.
"""
