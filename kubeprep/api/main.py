from dotenv import load_dotenv
from fastapi import FastAPI

from kubeprep.api.middleware import AuthMiddleware
from kubeprep.api.routes import install

load_dotenv()
app = FastAPI(title="kubeprep")
app.add_middleware(AuthMiddleware)

app.include_router(install.router)
