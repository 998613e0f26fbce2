"""
Console scripts for the AirSpace =nil; tooling.
"""
