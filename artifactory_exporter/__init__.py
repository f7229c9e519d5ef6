"""Data-acquisition core of the Artifactory metrics exporter."""
