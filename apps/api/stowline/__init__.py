"""Stowline storage and moving logistics API."""
