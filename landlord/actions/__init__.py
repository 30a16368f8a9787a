"""
Actions change the state of the cluster. Evicting a node is the only one.
"""
