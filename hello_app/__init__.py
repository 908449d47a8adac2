"""Single-route Hello world service packaged for Kubernetes."""
