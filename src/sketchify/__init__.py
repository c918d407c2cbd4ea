"""Sketchify - Resolve vector paths into filled-region sketches.

Sketchify takes 2D path descriptions made of lines, quadratic and cubic Bezier
curves (SVG-style path data) and resolves their self-intersections into closed
regions. Each region is classified as filled or as a hole of an enclosing
region, under either the nonzero or the even-odd fill rule, ready for a CAD
sketch generator.

Example:
    $ sketchify convert "M0,0 L10,10 L10,0 L0,10 Z"

This prints the two lobes of the bowtie as separate filled regions.
"""

__version__ = "0.1.0"
__author__ = "Dimosthenis Kaponis"

__all__ = ["__author__", "__version__"]
