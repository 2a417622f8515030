"""Answer agents built on top of the retrieval core."""
