"""Ring Hunter: random Middle-earth trees and a depth-first hunt for the Ring."""

__version__ = "0.1.0"
