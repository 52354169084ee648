"""Foundation layer for shared infrastructure modules."""
