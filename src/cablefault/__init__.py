"""Electric field and potential around a fault in an underground cable."""
