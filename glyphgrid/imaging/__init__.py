"""Image decoding adapters that produce PixelBuffers."""
