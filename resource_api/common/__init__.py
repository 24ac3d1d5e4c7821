# This file marks the common package for cross-cutting helpers.
# It exists so logging and database engine setup are shared by the API and the stores.
