"""HTTP routers for the medical report analyzer."""
