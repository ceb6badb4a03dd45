"""Storage layer: key codec, stat translation, listing, content access and the S3 store."""
