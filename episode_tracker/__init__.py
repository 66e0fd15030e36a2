"""
Client-side core of the episode tracker.

Mirrors a signed-in user's show list from Cloud Firestore into observable
local state and writes episode-count changes straight back to the store.
"""
