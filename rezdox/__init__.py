"""rezdox — Doxygen documentation step for rez package builds."""

__version__ = "0.1.0"
