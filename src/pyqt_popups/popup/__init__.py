"""
Popup handle and its operations.

ImmediateOps applies operations now; QueuedOps appends them to the popup's
Scheduler. The Popup handle picks one of them according to ``noqueue``.
"""
