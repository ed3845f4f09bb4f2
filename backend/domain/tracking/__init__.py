"""
Tracking Domain - Progress and priority of tasks within project versions.

This domain derives the computed state of tasks and versions:
- Parsing and formatting free-text durations
- Aggregating subtask completion into task and version progress
- Ranking tasks by remaining work into priority tiers
- Reporting employee, version and category progress
"""
