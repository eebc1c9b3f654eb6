"""
gcpeasy: make GCP and Kubernetes workflows easy

This package wraps the gcloud and kubectl command-line tools to switch
projects, pick GKE clusters, and reach application pods for logs, shells,
and Rails consoles.
"""

__version__ = "1.0.0"
__author__ = "gcpeasy team"
__description__ = "A CLI tool to make GCP and Kubernetes workflows easy"
