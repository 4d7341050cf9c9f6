"""Continental news portal backend."""
