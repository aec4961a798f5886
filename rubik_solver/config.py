# rubik_solver/config.py
"""
Constantes de configuración del motor y del solver.
"""

# Cota por defecto de la búsqueda ("God's number": todo estado alcanzable se
# resuelve en a lo sumo 20 movimientos HTM)
DEFAULT_MAX_DEPTH = 20

# Largo por defecto de los scrambles generados
DEFAULT_SCRAMBLE_LENGTH = 25

# Cada cuántos nodos expandidos se consulta la cancelación / timeout
CANCEL_CHECK_INTERVAL = 1024

# Espera (segundos) del proceso principal entre sondeos a los workers
WORKER_POLL_INTERVAL = 0.05
