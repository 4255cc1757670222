"""
VAR pipeline options.

Defaults reproduce the reference analysis of the Canadian labour market panel.
"""

VALID_IC = ('aic', 'hqic', 'bic', 'fpe')
VALID_METHODS = ('bs', 'wild', 'asymptotic')


class Options:
    """Optional inputs for VAR analysis."""

    def __init__(self, **kwargs):
        """Initialize the VAR options with default values, overridden by kwargs."""
        self.alpha = 0.05               # significance level of the unit-root tests
        self.adf_regression = 'ct'      # deterministic terms in the ADF regression
        self.adf_maxlag = None          # ADF lags, None => trunc((n-1)^(1/3))
        self.lag_max = 10               # largest lag order considered by the selector
        self.ic = 'aic'                 # information criterion used to pick the lag
        self.const = 1                  # deterministic terms: 0 none, 1 constant, 2 +trend, 3 +trend^2
        self.fevd_nsteps = 8            # horizons of the variance decomposition
        self.serial_lags = 10           # lags of the portmanteau test
        self.arch_lags = 5              # lags of the multivariate ARCH-LM test
        self.multivariate_only = True   # skip the per-equation ARCH tests
        self.nsteps = 20                # number of steps for computation of IRFs
        self.impact = 0                 # size of the shock for IRFs: 0=1stdev, 1=unit shock
        self.ident = 'short'            # identification method for IRFs (Cholesky)
        self.shock_var = 'prod'         # impulse variable
        self.responses = ['e', 'rw', 'U']  # response variables, None => all
        self.ndraws = 100               # number of bootstrap draws
        self.pctg = 95                  # confidence level for bands and forecast intervals
        self.method = 'bs'              # error bands: 'bs' bootstrap, 'wild' wild bootstrap, 'asymptotic'
        self.seed = None                # seed of the bootstrap generator
        self.max_attempts_mult = 5      # bootstrap gives up after ndraws*max_attempts_mult attempts
        self.fcst_nsteps = 8            # forecast horizon

        for key, value in kwargs.items():
            if not hasattr(self, key):
                raise ValueError(f'Unknown option {key!r}')
            setattr(self, key, value)
        self.validate()

    def validate(self):
        """Check option values, raising ValueError on the first invalid one."""
        if self.ic not in VALID_IC:
            raise ValueError(f'ic must be one of {VALID_IC}, got {self.ic!r}')
        if self.method not in VALID_METHODS:
            raise ValueError(f'The method {self.method} is not available')
        if self.ident != 'short':
            raise ValueError('Only Cholesky identification (ident="short") is supported')
        if not 0 < self.alpha < 1:
            raise ValueError('alpha must lie in (0, 1)')
        if not 0 < self.pctg < 100:
            raise ValueError('pctg must lie in (0, 100)')
        for name in ('lag_max', 'fevd_nsteps', 'nsteps', 'ndraws', 'fcst_nsteps',
                     'serial_lags', 'arch_lags', 'max_attempts_mult'):
            value = getattr(self, name)
            try:
                valid = int(value) >= 1
            except (TypeError, ValueError):
                valid = False
            if not valid:
                raise ValueError(f'{name} must be a positive integer, got {value!r}')

    def to_dict(self) -> dict:
        """Convert the options to a dictionary."""
        return {
            'alpha': self.alpha,
            'adf_regression': self.adf_regression,
            'adf_maxlag': self.adf_maxlag,
            'lag_max': self.lag_max,
            'ic': self.ic,
            'const': self.const,
            'fevd_nsteps': self.fevd_nsteps,
            'serial_lags': self.serial_lags,
            'arch_lags': self.arch_lags,
            'multivariate_only': self.multivariate_only,
            'nsteps': self.nsteps,
            'impact': self.impact,
            'ident': self.ident,
            'shock_var': self.shock_var,
            'responses': list(self.responses) if self.responses is not None else None,
            'ndraws': self.ndraws,
            'pctg': self.pctg,
            'method': self.method,
            'seed': self.seed,
            'max_attempts_mult': self.max_attempts_mult,
            'fcst_nsteps': self.fcst_nsteps,
        }
