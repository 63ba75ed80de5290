"""
slotclock - ordering window evaluation for cloud-kitchen meal slots.
"""

__version__ = "0.1.0"
