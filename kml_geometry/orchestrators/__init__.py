"""Pipeline entry points composing the activity stages."""
