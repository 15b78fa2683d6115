"""Physical constants, central bodies and the harmonic acceleration algorithms."""
