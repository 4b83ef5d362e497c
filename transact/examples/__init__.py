"""
transact.examples — small, complete contract handlers.

- xo: tic-tac-toe on a KeyHashAddresser
"""
