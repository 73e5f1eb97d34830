"""Analysis input contracts and file loaders."""
