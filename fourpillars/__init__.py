"""Four Pillars (BaZi) and sun-sign profiles from birth date, time and offset."""
