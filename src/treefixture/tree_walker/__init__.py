"""Canonical listings of on-disk directory trees and their comparison."""
