# Campaign Service Contracts

"""
Campaign Service Contract Module

This module contains:
- data_contract.py: test data factory and fixed reference clock for the
  campaign lifecycle service
"""
