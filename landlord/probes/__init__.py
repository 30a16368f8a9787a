"""
Probes gather information about the cluster without changing it.
"""
