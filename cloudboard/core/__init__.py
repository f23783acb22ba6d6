"""Core cloudboard functionality: state, events, dialogs and settings."""
