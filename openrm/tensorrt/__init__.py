"""Severity-filtered console logging for inference tools."""