"""Oracle-backed components: dimension judges and the improvement synthesizer."""
