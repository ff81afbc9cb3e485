# global_bridge/config.py

# Storage locations
DATA_FILE_DEFAULT = "globalbridge_data.json"
PARTICIPANTS_EXPORT_DEFAULT = "participants.txt"
MATCHES_EXPORT_DEFAULT = "matches.txt"
ACTIVITIES_EXPORT_DEFAULT = "activities.txt"

# Bumped whenever the JSON layout of the full-state file changes
STORE_FORMAT_VERSION = 1

# Registration rules
MIN_GRADE = 1
MAX_GRADE = 4

# Activity rendering
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"
STATUS_COMPLETED = "completed"
STATUS_IN_PROGRESS = "in-progress"

# Fit-aware matching weights
SAME_MAJOR_BONUS = 1.0
GRADE_PROXIMITY_WEIGHT = 0.25
