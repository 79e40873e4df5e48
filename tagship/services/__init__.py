"""Application services for the tagship CLI.

Services implement the release logic, coordinating between the domain layer
(core/) and infrastructure (platform/, git/).
"""
