"""
transact.cli — command-line entry points.

- address_generator: compute the radix address for one to three natural keys
"""
