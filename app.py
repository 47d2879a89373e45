import os
import sys

# Ensure src is on path for package imports
sys.path.insert(0, os.path.abspath("src"))

import finplan.logging_conf  # configure global logging
from finplan import config
from finplan.server import create_app

app = create_app()

if __name__ == "__main__":
    print(f"Servidor escuchando en el puerto {config.PORT}")
    print("Configura tu webhook de Twilio para que apunte a esta URL + /whatsapp")
    app.run(host=config.HOST, port=config.PORT, threaded=True)
