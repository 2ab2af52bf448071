"""
Computer opponents for Deadblock, one per skill tier, and ``select_move``.
"""
