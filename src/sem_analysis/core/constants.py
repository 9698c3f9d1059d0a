# Response code for a missing item response
MISSING_VALUE = -1

# Cell values treated as "missing" when reading response tables
MISSING_MARKERS = ("", "NA", "N/A", "NaN", "nan", ".")
