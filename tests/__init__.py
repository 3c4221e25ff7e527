"""Test package for thinktool.

Core tests drive the drill with a fake clock and seeded RNGs, so they are
deterministic and need no display. The smoke tests start the pygame shell
with SDL's dummy video driver. Run ``pytest`` from the project root.
"""
