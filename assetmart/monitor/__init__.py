"""Rich terminal views over marketplace state.

The renderer never holds state of its own: every call reads the listings,
events and balances it is given and turns them into Rich renderables.
"""
