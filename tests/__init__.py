"""Test package for Winter Games.

Core modules (stability, aim, targets, scoring, biathlon, tournament,
ranking, driver) are tested directly with seeded RNGs and fake clocks. The
pygame shell is smoke tested headlessly with SDL's dummy video driver. Run
``pytest`` from the project root.
"""
