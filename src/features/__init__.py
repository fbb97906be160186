"""Feature packages shared by the headline pipeline."""
