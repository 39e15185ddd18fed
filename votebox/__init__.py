"""Election voting backend: candidates, one vote per voter token, tallies."""
