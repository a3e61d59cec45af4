"""Status codes of the industrial camera SDK and its image-processing library."""