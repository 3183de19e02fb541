"""Black box modules behind the foodlog API."""
