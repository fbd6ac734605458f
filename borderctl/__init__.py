"""
borderctl - command-line client for the borderd gateway.
"""
