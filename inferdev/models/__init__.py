"""Domain records: catalog entries, respondent profile and survey state."""
