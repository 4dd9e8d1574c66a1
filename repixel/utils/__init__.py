"""Host-side helpers: image I/O, frame export, Qt scheduling."""
