"""Riconciliazione varianti e report del computo metrico aggiornato."""
