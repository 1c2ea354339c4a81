# External grant sources.
