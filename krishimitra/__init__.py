"""KrishiMitra: multilingual agricultural assistant backend."""
