import matplotlib

matplotlib.use("Agg") # charts are written to files, no display in test runs
